from typing import List, Set

IGNORE_DIRS: Set[str] = {
    '.git',
    '.hg',
    '.svn',
    'node_modules',
    '.idea',
    '.vscode',
    '.phpunit.cache',
}

# Matched case-insensitively against the file suffix.
SOURCE_EXTENSIONS: Set[str] = {'.php'}

DEFAULT_OUTPUT_DIR = './output'
DEFAULT_MAX_WORKERS = 4
# A pool scan gives up on the remaining files once none finished for this long.
FILE_TIMEOUT_SECONDS = 5.0

# Namespaces
NAMESPACE_SEPARATOR = '\\'
GLOBAL_NAMESPACE = 'Global'
ROOT_NAME = 'Root'
UNKNOWN_NAME = 'Unknown'

# --- Layout policy ---
# Buildings (one per type record)
BUILDING_SPACING = 15.0
BUILDING_BASE_OFFSET = 2.0
BUILDING_MIN_WIDTH = 5.0
BUILDING_MAX_WIDTH = 25.0
BUILDING_WIDTH_PER_ATTR = 4.0
BUILDING_WIDTH_BASE = 8.0
BUILDING_MIN_HEIGHT = 8.0
BUILDING_MAX_HEIGHT = 120.0
BUILDING_HEIGHT_PER_LINE = 2.0
BUILDING_HEIGHT_PER_METHOD = 5.0
BUILDING_MIN_DEPTH = 5.0
BUILDING_MAX_DEPTH = 30.0
BUILDING_DEPTH_PER_LINE = 0.8
BUILDING_DEPTH_BASE = 10.0

# Districts (one platform per namespace below the root)
DISTRICT_MIN_SPACING = 150.0
DISTRICT_SPACING_BASE = 50.0
DISTRICT_SPACING_PER_LEVEL = 50.0
PLATFORM_MIN_SIZE = 80.0
PLATFORM_MAX_SIZE = 400.0
PLATFORM_SIZE_BASE = 30.0
PLATFORM_SIZE_PER_RECORD = 10.0
PLATFORM_BASE_HEIGHT = 2.0
PLATFORM_HEIGHT_PER_LEVEL = 1.0

# Labels
RECORDS_LABEL_BASE_Y = 20.0
RECORDS_LABEL_Y_PER_LEVEL = 5.0
RECORDS_LABEL_FONT_SIZE = 14
RECORDS_LABEL_COLOR = '#ffffff'
DISTRICT_LABEL_BASE_Y = 25.0
DISTRICT_LABEL_Y_PER_LEVEL = 8.0
DISTRICT_LABEL_BASE_FONT_SIZE = 16
DISTRICT_LABEL_FONT_SIZE_PER_LEVEL = 2
DISTRICT_LABEL_COLOR = '#ffff00'

# Camera framing
CITY_MIN_SIZE = 400.0
CITY_SIZE_PER_BREADTH = 150.0
CITY_SIZE_PER_DEPTH = 100.0
CAMERA_DISTANCE_FACTOR = 1.5
CAMERA_MIN_DISTANCE = 1000.0
CAMERA_OFFSET = (0.7, 0.4, 0.7)

# Colors
BUILDING_COLORS = {
    'interface': '#5C7CFA',
    'trait': '#845EC2',
    'abstract': '#FF8E53',
    'class': '#4ECDC4',
}
PLATFORM_COLORS: List[str] = ['#666666', '#777777', '#888888', '#999999']
