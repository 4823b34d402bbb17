from rest_framework import status
from rest_framework.response import Response


class EnvelopeResponseMixin:
    """
    Mixin that wraps successful ViewSet responses as
    ``{"success": true, "message": ..., "data": ...}``.

    Error responses are already rendered in that shape by the exception
    handler and pass through untouched.
    """

    envelope_messages = {}

    def respond(self, data=None, message="", status_code=status.HTTP_200_OK):
        body = {"success": True, "message": message}
        if data is not None:
            body["data"] = data
        return Response(body, status=status_code)

    def get_envelope_message(self):
        action = getattr(self, "action", None)
        return self.envelope_messages.get(action, "")

    def destroy(self, request, *args, **kwargs):
        instance = self.get_object()
        self.perform_destroy(instance)
        return self.respond(message=self.get_envelope_message() or "Deleted successfully")

    def finalize_response(self, request, response, *args, **kwargs):
        if (
            isinstance(response, Response)
            and response.status_code < 400
            and not (isinstance(response.data, dict) and "success" in response.data)
        ):
            body = {"success": True, "message": self.get_envelope_message()}
            if response.data is not None:
                body["data"] = response.data
            response.data = body
        return super().finalize_response(request, response, *args, **kwargs)
