from .envelope import ApiResponse, ErrorResponse

__all__ = ["ApiResponse", "ErrorResponse"]
