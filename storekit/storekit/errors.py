"""
Исключения сервисного слоя.

Сервисы (storefront.services, pages.services, accounts.services) бросают
ServiceError и его наследников. HTML-views превращают их в messages /
ошибки формы, API отдаёт через storekit.api_errors.
"""


class ServiceError(Exception):
    status_code = 400
    default_message = 'Invalid request'

    def __init__(self, message=None, errors=None):
        self.message = message or self.default_message
        self.errors = errors
        super().__init__(self.message)

    def to_payload(self):
        payload = {'message': self.message}
        if self.errors:
            payload['errors'] = self.errors
        return payload


class ValidationFailed(ServiceError):
    status_code = 400
    default_message = 'Validation failed'


class NotFoundError(ServiceError):
    status_code = 404
    default_message = 'Not found'


class ConflictError(ServiceError):
    status_code = 409
    default_message = 'Already exists'


class AuthenticationError(ServiceError):
    status_code = 401
    default_message = 'Invalid credentials'
