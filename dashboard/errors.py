"""Exception types shared by the store, auth and page layers."""


class DashboardError(Exception):
    """Base class for errors the pages report back to the user."""

    message = 'Something went wrong. Please try again.'
    status_code = 500

    def __init__(self, message=None):
        super().__init__(message or self.message)
        if message:
            self.message = message


class StoreError(DashboardError):
    """A create/update/delete or read was rejected by the document store."""

    message = 'The database rejected the request. Please try again.'
    status_code = 502


class RecordNotFound(DashboardError):
    message = 'Record not found.'
    status_code = 404


class SubscriptionError(StoreError):
    message = 'Could not fetch live data.'


class AuthError(DashboardError):
    """Raised by the auth service; ``code`` mirrors the identity provider."""

    message = 'Authentication failed.'
    status_code = 401

    def __init__(self, code, message=None):
        self.code = code
        super().__init__(message)


class DeleteRestricted(DashboardError):
    """Deletion of this record type is reserved for administrators."""

    message = ('Deleting this record is restricted. '
               'Please contact an administrator to remove it.')
    status_code = 403


class InvalidInput(DashboardError):
    message = 'Invalid input.'
    status_code = 400
