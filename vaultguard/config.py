"""
Configuration constants for the VaultGuard engine.
"""

import os

# Application Metadata
APP_VERSION = "1.0.0"  # Use: Current version of the engine. Type: str. Range: Semantic versioning string (e.g., "1.0.0")
APP_NAME = "VaultGuard"  # Use: Name of the application, used in the breach API user agent. Type: str. Range: Any valid string.

# Storage Settings
CONFIG_DIR_NAME = ".vaultguard"  # Use: Name of the hidden directory within the user's home directory that holds the vault files. Type: str. Range: Any valid directory name.
STORAGE_DIR = os.path.join(os.path.expanduser("~"), CONFIG_DIR_NAME)  # Use: Default directory for vault files, one file per account. Type: str. Range: Any writable directory path.
VAULT_FILE_MODE = 0o600  # Use: POSIX permission bits applied to every written vault file. Type: int. Range: Octal file mode; owner read/write only is recommended.
FILENAME_HASH_ALGORITHM = "sha1"  # Use: hashlib algorithm used to derive vault filenames from account names. Type: str. Range: Any 160-bit hashlib algorithm name.

# Security Settings
KEY_HASH_ALGORITHM = "sha256"  # Use: hashlib algorithm whose digest is truncated into the AES key. Type: str. Range: "sha256".
KEY_SIZE = 16  # Use: Size of the AES key in bytes taken from the passphrase digest. Corresponds to AES-128. Type: int. Range: 16 (AES-128), 24 (AES-192), or 32 (AES-256) bytes.
BLOCK_SIZE_BITS = 128  # Use: AES block size in bits, used for PKCS7 padding. Type: int. Range: 128.
TEXT_ENCODING = "utf-8"  # Use: Encoding for plaintext, passphrases and account names before hashing or encryption. Type: str. Range: "utf-8".

# Breach Check Settings
BREACH_API_URL = "https://api.pwnedpasswords.com"  # Use: Base URL of the k-anonymity breach corpus. Type: str. Range: HTTPS URL without trailing slash.
BREACH_PREFIX_LENGTH = 5  # Use: Number of leading SHA-1 hex characters sent to the breach API. Type: int. Range: 5 (fixed by the API).
BREACH_CONNECT_TIMEOUT_SECONDS = 5  # Use: Connect timeout for breach API requests. Type: int. Range: Positive integer.
BREACH_READ_TIMEOUT_SECONDS = 5  # Use: Read timeout for breach API requests. Type: int. Range: Positive integer.
BREACH_USER_AGENT = f"{APP_NAME}/{APP_VERSION}"  # Use: User-Agent header sent to the breach API. Type: str (f-string). Range: Derived from APP_NAME and APP_VERSION.

# TOTP Settings
TOTP_DIGITS = 6  # Use: Number of digits in a generated one-time code. Type: int. Range: 6 or 8.
TOTP_INTERVAL_SECONDS = 30  # Use: Length of one TOTP time step in seconds. Type: int. Range: Positive integer, 30 is standard.
TOTP_TICK_MILLISECONDS = 1000  # Use: Interval between two code notifications of a running stream. Type: int. Range: Positive integer.

# Search Settings
FUZZY_MATCH_THRESHOLD = 85  # Use: Minimum fuzzy score (0-100) for a search hit. Type: int. Range: 0 to 100.

# Password Strength Settings
STRENGTH_SIMILARITY_THRESHOLD = 85  # Use: Fuzzy ratio above which a dictionary word counts as similar to a password. Type: int. Range: 0 to 100.
STRENGTH_EXACT_MATCH_PENALTY = -100  # Use: Flat score applied when the password is a known password or an English word. Type: int. Range: Negative integer.
STRENGTH_PARTIAL_MATCH_POINTS = 2  # Use: Penalty basis per dictionary word with a high partial ratio. Type: int. Range: Positive integer.
STRENGTH_TOKEN_SET_MATCH_POINTS = 8  # Use: Penalty basis per dictionary word with a high token set ratio. Type: int. Range: Positive integer.
STRENGTH_PENALTY_FACTOR = -2  # Use: Multiplier applied to the summed penalty basis. Type: int. Range: Negative integer.
DICTIONARY_DIR = os.path.join(os.path.dirname(os.path.abspath(__file__)), "dictionaries")  # Use: Directory of the bundled reference word lists. Type: str. Range: Valid directory path.
COMMON_PASSWORDS_FILE = os.path.join(DICTIONARY_DIR, "known_passwords.txt")  # Use: Word list of commonly used passwords, one per line. Type: str. Range: Valid file path.
ENGLISH_WORDS_FILE = os.path.join(DICTIONARY_DIR, "english.txt")  # Use: Word list of English vocabulary, one per line. Type: str. Range: Valid file path.

# Password Generator Settings
PASSWORD_GENERATOR_MIN_LENGTH = 4  # Use: Minimum allowed length for generated passwords. Type: int. Range: Positive integer.
PASSWORD_GENERATOR_DEFAULT_LENGTH = 16  # Use: Default length offered to the presentation layer. Type: int. Range: PASSWORD_GENERATOR_MIN_LENGTH or greater.
LOWERCASE_CHARS = "abcdefghijklmnopqrstuvwxyz"  # Use: Base character set, always included. Type: str. Range: Any string of characters.
UPPERCASE_CHARS = "ABCDEFGHIJKLMNOPQRSTUVWXYZ"  # Use: Character set for the uppercase option. Type: str. Range: Any string of characters.
DIGIT_CHARS = "0123456789"  # Use: Character set for the digits option. Type: str. Range: Any string of characters.
SPECIAL_CHARS = "!@#$%&*()_+-=[]|/?><"  # Use: Character set for the special symbols option. Type: str. Range: Any string of characters.

# Background Task Settings
WORKER_SHUTDOWN_TIMEOUT_MS = 800  # Use: Time to wait for a background worker to finish before it is terminated on shutdown. Type: int. Range: Positive integer.
