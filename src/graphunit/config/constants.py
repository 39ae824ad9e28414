DEFAULTS = {
    # Skip candidates whose degree cannot host the reference node
    "MATCHER_DEGREE_PRUNING": True,
    # Maximum number of nodes / buckets listed in a mismatch message
    "MATCHER_MAX_DIAGNOSTIC_ITEMS": 5,
    # Debug-log every placement attempted by the matcher
    "MATCHER_LOG_SEARCH": False,
    # Labels starting with this prefix mark internal (non-business) nodes
    "POLICY_INTERNAL_LABEL_PREFIX": "_GA_",
}
