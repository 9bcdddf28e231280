"""OneDrive project folders: provisioning (authenticated) and public browsing."""

from surveydisco.onedrive.folders import FolderManager
from surveydisco.onedrive.gateway import PublicFileGateway
from surveydisco.onedrive.graph import GraphClient
from surveydisco.onedrive.oauth import OAuthClient

__all__ = ["FolderManager", "GraphClient", "OAuthClient", "PublicFileGateway"]
