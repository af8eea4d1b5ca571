"""Protocol constants.

Keep these in one place to avoid stringly-typed message handling.
"""

# Requests
ASK = "ASK"
SCHED = "SCHED"

# Finalization of the most recently delivered task
ACK = "ACK"
DCL = "DCL"
DEL = "DEL"

END = "END"

# Reply delivering a task; anything else, usually NOPE, means no task is
# available.
WANT = "WANT?"

# Separates a scheduled payload from its destination queue.
QUEUE_SEPARATOR = "@"
