"""Protocol constants.

Keep these in one place to avoid stringly-typed message handling.
"""

# Actions reserved by the handshake. Every other action value is a domain
# action: outbound it is a request, inbound it is a push.

CHALLENGE = "character_count"
CONFIRM = "confirm_count"
ACK = "ack"
ERROR = "error"

CONTROL = frozenset((CHALLENGE, CONFIRM, ACK, ERROR))

# The one domain action the handshake is aware of: a successful
# acknowledgment for it carries new session credentials.

LOGIN = "login"

# Status values.

SUCCESS = "success"
FAILURE = "failure"
STATUS_ERROR = "error"
CANCELLED = "cancelled"

STATUSES = frozenset((SUCCESS, FAILURE, STATUS_ERROR, CANCELLED))

# Keys inside the message body.

TRANSACTION_ID = "transaction_id"
LETTER_FREQUENCIES = "letter_frequencies"
CONFIRM_FLAG = "confirm"
ORIGINAL_ACTION = "original_action"

SESSION_KEY = "session_key"
CHAT_ID = "chatid"
PASSWORD = "password"
