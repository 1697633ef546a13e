"""Custom exceptions for the PR comment rate analyzer."""


class CommentRateError(Exception):
    """Base exception for analyzer errors."""
    pass


class ConfigurationError(CommentRateError):
    """Exception for missing or invalid user input."""
    pass


class RepositoryParseError(ConfigurationError):
    """Exception for repository identifiers or PR URLs that cannot be parsed."""
    pass


class RepositoryDetectionError(ConfigurationError):
    """Exception raised when the repository cannot be read from the git remote."""
    pass


class NetworkError(CommentRateError):
    """Exception for network-related errors."""
    pass


class AuthenticationError(NetworkError):
    """Exception for rejected or unusable tokens."""
    pass


class RateLimitError(NetworkError):
    """Exception for rate limiting errors."""
    pass


class NotFoundError(NetworkError):
    """Exception for repositories or pull requests the token cannot see."""
    pass


class NoCommentsError(CommentRateError):
    """Exception raised when there are no comments to divide the time by."""
    pass
