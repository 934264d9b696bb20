from screenshot2png.utils.retry import RetryError, RetryExecutor, RetryPolicy

__all__ = [
    'RetryError',
    'RetryExecutor',
    'RetryPolicy',
]
