from smartops.services.access_management import AccessManagementService
from smartops.services.authorization import Authorizer
from smartops.services.protocols import CredentialHasher, SessionManager

__all__ = ["AccessManagementService", "Authorizer", "CredentialHasher", "SessionManager"]
