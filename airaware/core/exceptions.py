"""Custom application exceptions."""


class AppException(Exception):
    """Base application exception."""

    def __init__(self, message: str, status_code: int = 500):
        """Initialize exception with message and status code."""
        self.message = message
        self.status_code = status_code
        super().__init__(self.message)


class NotFoundError(AppException):
    """User input does not resolve to a known place."""

    def __init__(self, message: str = "City not found. Please check the spelling and try again."):
        """Initialize with 404 status code."""
        super().__init__(message, status_code=404)


class ServiceUnavailableError(AppException):
    """Transport or connectivity failure talking to the geocoding provider."""

    def __init__(self, message: str = "Unable to validate city. Please try again later."):
        """Initialize with 503 status code."""
        super().__init__(message, status_code=503)


class WeatherUnavailableError(AppException):
    """Current weather could not be retrieved."""

    def __init__(self, message: str = "Unable to fetch weather data for this location."):
        """Initialize with 502 status code."""
        super().__init__(message, status_code=502)


class AirQualityUnavailableError(AppException):
    """Air quality could not be retrieved, or the location has no coverage."""

    def __init__(self, message: str = "Unable to fetch air quality data for this location."):
        """Initialize with 502 status code."""
        super().__init__(message, status_code=502)


class RequestSupersededError(AppException):
    """A newer request replaced this one before it finished."""

    def __init__(self, message: str = "Request was superseded by a newer one"):
        """Initialize with 409 status code."""
        super().__init__(message, status_code=409)
