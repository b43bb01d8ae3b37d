import logging

from rest_framework import status
from rest_framework.exceptions import APIException
from rest_framework.response import Response
from rest_framework.views import exception_handler as drf_exception_handler

logger = logging.getLogger(__name__)


class ProfileResolutionError(APIException):
    """The authenticated account has no profile row to scope a mutation to."""
    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = 'Could not verify profile'
    default_code = 'profile_unverified'


class MutationRejected(APIException):
    """A scoped write touched zero rows (missing target or not owned)."""
    status_code = status.HTTP_404_NOT_FOUND
    default_detail = 'The change was rejected'
    default_code = 'mutation_rejected'


class SignInFailed(APIException):
    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = 'Invalid email or password'
    default_code = 'invalid_credentials'


class AccountExists(APIException):
    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = 'An account with this email already exists'
    default_code = 'account_exists'


def api_exception_handler(exc, context):
    resp = drf_exception_handler(exc, context)
    if resp is None:
        logger.exception('unhandled error in %s', context.get('view').__class__.__name__, exc_info=exc)
        return Response({'ok': False, 'error': {'code': 'server_error', 'message': str(exc)}}, status=500)
    # normalize response
    if isinstance(resp.data, dict):
        detail = resp.data.get('detail') or resp.data
    else:
        detail = resp.data
    code = getattr(exc, 'default_code', 'api_error') if isinstance(exc, APIException) else 'api_error'
    return Response({'ok': False, 'error': {'code': code, 'message': detail}}, status=resp.status_code, headers=_passthrough_headers(resp))


def _passthrough_headers(resp):
    return {k: resp[k] for k in ('WWW-Authenticate', 'Retry-After') if resp.has_header(k)}
