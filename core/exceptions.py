"""
Custom exceptions for Restoe

Every failure a user action can hit is one of these; the API renders them
through core.exception_handler.
"""
from rest_framework import status
from rest_framework.exceptions import APIException


class Unauthenticated(APIException):
    status_code = status.HTTP_401_UNAUTHORIZED
    default_detail = 'Not authenticated.'
    default_code = 'unauthenticated'


class Forbidden(APIException):
    status_code = status.HTTP_403_FORBIDDEN
    default_detail = 'You do not have permission to perform this action.'
    default_code = 'forbidden'


class NotFound(APIException):
    status_code = status.HTTP_404_NOT_FOUND
    default_detail = 'Resource not found.'
    default_code = 'not_found'


class AlreadyUsed(APIException):
    status_code = status.HTTP_409_CONFLICT
    default_detail = 'This invitation has already been used.'
    default_code = 'already_used'


class Expired(APIException):
    status_code = status.HTTP_410_GONE
    default_detail = 'This invitation has expired.'
    default_code = 'expired'


class EmailMismatch(APIException):
    status_code = status.HTTP_403_FORBIDDEN
    default_detail = 'This invitation was sent to a different email address.'
    default_code = 'email_mismatch'


class RateLimited(APIException):
    status_code = status.HTTP_429_TOO_MANY_REQUESTS
    default_detail = 'Please wait before sending another invitation to this email.'
    default_code = 'rate_limited'


class InvalidQuantity(APIException):
    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = 'Quantity must be at least 1.'
    default_code = 'invalid_quantity'


class InvalidCapacity(APIException):
    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = 'Capacity must be greater than 0.'
    default_code = 'invalid_capacity'


class InvalidPrice(APIException):
    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = 'Price must be a number greater than or equal to 0.'
    default_code = 'invalid_price'


class InvalidOrderStatus(APIException):
    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = 'Invalid order status.'
    default_code = 'invalid_order_status'


class ItemUnavailable(APIException):
    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = 'This menu item is not currently available.'
    default_code = 'item_unavailable'


class CannotRemoveOwner(APIException):
    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = 'Cannot remove owner.'
    default_code = 'cannot_remove_owner'


class AlreadyMember(APIException):
    status_code = status.HTTP_409_CONFLICT
    default_detail = 'User is already a member of this restaurant.'
    default_code = 'already_member'


class EmailDeliveryFailed(APIException):
    status_code = status.HTTP_502_BAD_GATEWAY
    default_detail = 'Failed to send email.'
    default_code = 'email_delivery_failed'


class PersistenceError(APIException):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_detail = 'A database error occurred.'
    default_code = 'persistence_error'
