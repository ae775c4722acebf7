# Navigation
# Going back within this many seconds of a track start selects the previous
# track, later it restarts the current one.
RESTART_THRESHOLD_SECONDS = 3.0

# Configuration par défaut
DEFAULT_CONFIG = {
    'log_level': 'INFO',
    'log_dir': 'logs',
    'log_to_file': True,
    'restart_threshold': RESTART_THRESHOLD_SECONDS,
    'shuffle_seed': None,
    'debug': False,
}

# Variables d'environnement reconnues
ENV_PREFIX = 'PLAYER_'

VALID_LOG_LEVELS = ('DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL')

# Logging
LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
LOG_FILE_NAME = 'player.log'
LOG_MAX_BYTES = 10_000_000  # 10MB
LOG_BACKUP_COUNT = 5

# Messages de journalisation
MESSAGES = {
    'ANCHOR_NOT_FOUND': "Anchor track '{anchor}' not found in queue",
    'TRACK_NOT_FOUND': "Track '{track}' not found in queue",
    'PIVOT_NOT_FOUND': "Shuffle pivot '{track}' not found in queue",
    'REORDER_ROLLED_BACK': "Reorder of '{track}' rolled back: {reason}",
    'QUEUE_EXHAUSTED': "Reached end of queue at index {index}, pausing",
    'NO_ENGINE': "No media engine attached to the player",
}
