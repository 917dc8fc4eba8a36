import logging
import logging.config
from config.main_config import LOG_FILE


class QuestionFilter(logging.Filter):
    def filter(self, record):
        if not hasattr(record, 'question'):
            record.question = '-'  # Set default question id if not provided
        return True


def build_logging_config(log_file: str = LOG_FILE) -> dict:
    return {
        'version': 1,
        'disable_existing_loggers': False,
        'formatters': {
            'standard': {
                'format': '%(asctime)s - %(name)s - %(levelname)s - %(question)s - %(message)s'
            },
        },
        'filters': {
            'question_filter': {
                '()': QuestionFilter,
            },
        },
        'handlers': {
            'file': {
                'level': 'INFO',
                'class': 'logging.FileHandler',
                'filename': log_file,
                'formatter': 'standard',
                'filters': ['question_filter']
            },
            'console': {
                'level': 'INFO',
                'class': 'logging.StreamHandler',
                'formatter': 'standard',
                'filters': ['question_filter']
            },
        },
        'loggers': {
            'use_cases': {
                'handlers': ['file', 'console'],
                'level': 'INFO',
                'propagate': False,
            },
            'repositories': {
                'handlers': ['file', 'console'],
                'level': 'INFO',
                'propagate': False,
            },
            '': {
                'handlers': ['file', 'console'],
                'level': 'WARNING',
                'propagate': True,
            }
        }
    }


def configure_logging(log_file: str = LOG_FILE) -> None:
    logging.config.dictConfig(build_logging_config(log_file))
