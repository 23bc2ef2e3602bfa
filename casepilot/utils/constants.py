"""Global constants for CasePilot."""


# ====================
# File System Configuration
# ====================

CONFIG_FILE_NAME = 'config.yaml'
CONFIG_DIR_NAME = '.casepilot'
ENV_PREFIX = 'CASEPILOT_'
DEFAULT_OUTPUT_DIR = 'test_suites'


# ====================
# Pipeline Phases
# ====================

PHASE_SCORING = 'scoring'
PHASE_RECOMMENDING = 'recommending'
PHASE_SYNTHESIZING = 'synthesizing'
PHASE_OPTIMIZING = 'optimizing'
PHASE_COMPLETE = 'complete'

PHASE_PERCENT = {
    PHASE_SCORING: 10,
    PHASE_RECOMMENDING: 30,
    PHASE_SYNTHESIZING: 60,
    PHASE_OPTIMIZING: 90,
    PHASE_COMPLETE: 100,
}


# ====================
# UI Display Configuration
# ====================

UI_COLORS = {
    'success': 'green',
    'error': 'red',
    'warning': 'yellow',
}

UI_ICONS = {
    'success': '✓',
    'error': '✗',
    'folder': '📁',
}
