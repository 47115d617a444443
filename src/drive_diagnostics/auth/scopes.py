"""
Google OAuth Scopes for Drive diagnostics.

This module defines the OAuth scopes each OAuth-consuming feature requests.
They are listed in the console checklist and passed along when a
client_secret.json file is loaded.
"""

import logging
from typing import Dict, List

from ..utils.constants import FEATURE_AUTH, FEATURE_DRIVE

logger = logging.getLogger(__name__)

# Base OAuth scopes required for user identification
USERINFO_EMAIL_SCOPE = "https://www.googleapis.com/auth/userinfo.email"
USERINFO_PROFILE_SCOPE = "https://www.googleapis.com/auth/userinfo.profile"
OPENID_SCOPE = "openid"

BASE_SCOPES = [OPENID_SCOPE, USERINFO_EMAIL_SCOPE, USERINFO_PROFILE_SCOPE]

# Google Drive scopes
DRIVE_FILE_SCOPE = "https://www.googleapis.com/auth/drive.file"
DRIVE_APPDATA_SCOPE = "https://www.googleapis.com/auth/drive.appdata"

DRIVE_SCOPES = [DRIVE_FILE_SCOPE, DRIVE_APPDATA_SCOPE]

FEATURE_SCOPES: Dict[str, List[str]] = {
    FEATURE_DRIVE: DRIVE_SCOPES + [USERINFO_EMAIL_SCOPE],
    FEATURE_AUTH: BASE_SCOPES,
}


def get_scopes(feature: str) -> List[str]:
    """
    Get the OAuth scopes a feature requests.

    Args:
        feature: Feature key (e.g., "drive").

    Returns:
        List of unique scopes in declaration order. Unknown features get
        the base identification scopes.
    """
    scopes = FEATURE_SCOPES.get(feature)
    if scopes is None:
        logger.debug(f"No scopes registered for feature '{feature}', using base scopes")
        scopes = BASE_SCOPES
    return list(dict.fromkeys(scopes))
