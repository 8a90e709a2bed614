"""Application exceptions"""


class TrailerFinderError(Exception):
    """Base class for all application errors"""


class ConfigurationError(TrailerFinderError):
    """Required configuration is missing or invalid"""


class TransportError(TrailerFinderError):
    """Remote API unreachable or answered with a non-2xx status"""

    def __init__(self, message: str, status_code: int = None):
        super().__init__(message)
        self.status_code = status_code


class ParseError(TrailerFinderError):
    """Remote API answered with a body we cannot interpret"""


class TrailerUnavailable(TrailerFinderError):
    """No playable YouTube video exists for a movie"""

    def __init__(self, movie_id: int):
        super().__init__(f"No YouTube trailer available for movie {movie_id}")
        self.movie_id = movie_id


class InvalidTransition(TrailerFinderError):
    """A fetch status change that the view state machine does not allow"""
