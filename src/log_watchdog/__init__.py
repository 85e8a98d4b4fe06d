"""log-watchdog - run commands when a log file says so.

Tails one or more log files, tests every newly appended line against a
pattern, and runs a list of external commands on match, with a per-watchdog
debounce window and an optional one-shot policy.
"""

__version__ = "0.1.0"
