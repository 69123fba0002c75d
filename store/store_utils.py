# store/store_utils.py
import json
import logging
from functools import wraps

from django.http import JsonResponse

from .exceptions import StoreError, ValidationError

logger = logging.getLogger(__name__)


def request_data(request):
    """
    JSON bodies for API clients, form fields for multipart uploads.
    Django only parses form bodies on POST, so anything else must be JSON.
    """
    if request.content_type == 'application/json':
        if not request.body:
            return {}
        try:
            data = json.loads(request.body)
        except json.JSONDecodeError:
            raise ValidationError("Malformed JSON body")
        if not isinstance(data, dict):
            raise ValidationError("Request body must be a JSON object")
        return data
    if request.method != 'POST':
        if request.body:
            raise ValidationError(f"{request.method} requests must send a JSON body; use POST for file uploads")
        return {}
    return request.POST.dict()


def error_response(message, status=400):
    return JsonResponse({'status': 'error', 'message': message}, status=status)


def api_view(methods):
    """
    Restrict HTTP methods and turn StoreError into a JSON error response.
    Anything unexpected is logged and answered with a 500.
    """
    def deco(fn):
        @wraps(fn)
        def wrapper(request, *args, **kwargs):
            if request.method not in methods:
                return error_response('Method not allowed', status=405)
            try:
                return fn(request, *args, **kwargs)
            except StoreError as e:
                return error_response(e.message, status=e.status_code)
            except Exception:
                logger.exception("Unhandled error in %s", fn.__name__)
                return error_response('Internal server error', status=500)
        return wrapper
    return deco


def login_required_json(fn):
    @wraps(fn)
    def wrapper(request, *args, **kwargs):
        if not request.user.is_authenticated:
            return error_response('Authentication required', status=401)
        return fn(request, *args, **kwargs)
    return wrapper


def staff_required_json(fn):
    @wraps(fn)
    def wrapper(request, *args, **kwargs):
        if not request.user.is_authenticated:
            return error_response('Authentication required', status=401)
        if not request.user.is_staff:
            return error_response('Admin access required', status=403)
        return fn(request, *args, **kwargs)
    return wrapper
