RT = b'\x1d'  # record terminator
FT = b'\x1e'  # field terminator
US = b'\x1f'  # subfield delimiter

LEADER_LENGTH = 24
DIRECTORY_ENTRY_LENGTH = 12
CONTROL_TAG_PREFIX = '00'

DEFAULT_ENCODING = 'utf-8'
DEFAULT_ERRORS = 'replace'
DEFAULT_CHUNK_SIZE = 64 * 1024
