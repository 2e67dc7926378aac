"""
Constants and configuration values for the Mesh Warp Flow system.
Centralizes all magic numbers and configuration constants.
"""


# Mesh Constants
class MeshConstants:
    """Constants related to mesh description files."""

    COMMENT_CHAR = "#"
    POINT_COMPONENTS = 2
    TRIANGLE_COMPONENTS = 3

    # Token counts used to classify a record
    CONTROL_POINT_TOKENS = 2
    SINGLE_TOKEN = 1

    # Number formatting when writing mesh files
    COORDINATE_PRECISION = 6


# Warp Constants
class WarpDefaults:
    """Default parameters for the mesh warp engine."""

    DEGENERATE_POLICY = "abort"
    INTERPOLATION = "linear"
    WORKERS = 1
    MAX_WORKERS = 32

    # Relative determinant threshold, scaled by the squared longest source edge
    DETERMINANT_EPSILON = 1e-9

    # Background used when the output format cannot store alpha (BGR)
    BACKGROUND = "white"


# Image Constants
class ImageConstants:
    """Constants related to image loading and encoding."""

    CHANNELS_BGRA = 4

    # Formats able to store an alpha channel
    ALPHA_FORMATS = [".png", ".webp", ".tif", ".tiff"]
    DEFAULT_OUTPUT_FORMAT = "png"

    # Thumbnail settings
    DEFAULT_THUMBNAIL_WIDTH = 320

    # Named background colors (BGR format for OpenCV)
    NAMED_COLORS = {
        "white": (255, 255, 255),
        "black": (0, 0, 0),
        "gray": (128, 128, 128),
        "grey": (128, 128, 128),
        "red": (0, 0, 255),
        "green": (0, 255, 0),
        "blue": (255, 0, 0),
    }


# API Constants
class APIConstants:
    """Constants for API endpoints."""

    MAX_UPLOAD_SIZE_MB = 50
    DEFAULT_HOST = "0.0.0.0"
    DEFAULT_PORT = 8000


# System Constants
class SystemConstants:
    """Constants for system operations."""

    LOG_LEVEL_DEFAULT = "INFO"
    LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    ENV_PREFIX = "MESHWARP_"


# Overlay drawing constants (BGR format)
class OverlayDefaults:
    """Default parameters for mesh overlay rendering."""

    EDGE_COLOR = (0, 255, 0)  # Green
    POINT_COLOR = (0, 0, 255)  # Red
    TEXT_COLOR = (255, 255, 0)  # Cyan
    LINE_THICKNESS = 1
    POINT_RADIUS = 3
    FONT_SCALE = 0.4


# Error Messages
class ErrorMessages:
    """Standard error messages."""

    # Mesh errors
    MESH_NOT_FOUND = "Mesh file {path} does not exist or is not readable"
    MESH_EMPTY = "Mesh file {path} is empty"
    MALFORMED_RECORD = "{source}:{line_number}: malformed {kind} record: {content!r}"
    TRIANGLE_INDEX = (
        "{source}:{line_number}: triangle references control point {index} "
        "but only {count} are defined"
    )
    COUNT_MISMATCH = (
        "{source}: parsed {sources} source points but {destinations} destination points"
    )

    # Geometry errors
    DEGENERATE_TRIANGLE = "Triangle {index} has collinear source vertices {vertices}"
    DEGENERATE_POINTS = "Source vertices {vertices} are collinear"

    # Image errors
    IMAGE_NOT_FOUND = "Image file {path} does not exist or is not readable"
    IMAGE_EMPTY = "Image file {path} is empty"
    IMAGE_READ_FAILED = "Failed to read image {path}"
    IMAGE_WRITE_FAILED = "Failed to write image {path}: {error}"
    IMAGE_DECODE_FAILED = "Failed to decode image data"
    INVALID_COLOR = "Invalid color: {color!r}"
