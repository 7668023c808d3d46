"""pam-explainer: explain what a PAM stack will decide.

Parses PAM-style service configuration lines, groups them by facility and
replays the stacking algorithm (required/requisite/sufficient/optional) to
show the aggregate verdict of each facility, without running any module.
"""

__version__ = "0.1.0"
