"""
Fixed values shared by the recommendation, chat and notification flows.

Scoring weights live next to the scoring rules in
planter/agents/recommendation/scoring.py; this module holds the limits
that several layers need to agree on.
"""

# Recommendations strictly above this score are kept by the local scorer
MIN_MATCH_SCORE = 0.3

# Recommendations retained per generation (both strategies)
MAX_RECOMMENDATIONS = 5

# Persisted chat turns replayed to the completion endpoint per request
CHAT_CONTEXT_WINDOW = 10

# Default title for newly created chat sessions
DEFAULT_CHAT_TITLE = "Разговор о растениях"

# Chat roles as stored in chat_messages.role and sent to the completion API
CHAT_ROLES = {
    'SYSTEM': 'system',
    'USER': 'user',
    'ASSISTANT': 'assistant',
}

# notifications.type values
NOTIFICATION_TYPES = {
    'WATERING': 'WATERING',
}

# Chat working sets kept in memory before the least recently used is evicted
MAX_CACHED_CHAT_SESSIONS = 1000
