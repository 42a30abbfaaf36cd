"""HTTP handlers (views) - handle HTTP concerns only.

Handlers:
- Parse requests and validate input format
- Call services for business logic
- Map domain errors to HTTP responses
- Never contain business logic
- Never expose internal error details
"""

from rest_framework import status
from rest_framework.permissions import IsAuthenticated, IsAuthenticatedOrReadOnly
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.views import APIView

from marketplace.domain import UserId
from marketplace.domain.errors import DomainError, ErrorCode
from marketplace.handlers import serializers as s
from marketplace.services.application_service import ApplicationService
from marketplace.services.band_service import BandService
from marketplace.services.event_service import EventService
from marketplace.services.message_service import MessageService
from marketplace.services.profile_service import ProfileService
from marketplace.services.review_service import ReviewService
from marketplace.stores.django_store import (
    DjangoBandRequestStore,
    DjangoBandStore,
    DjangoBookingStore,
    DjangoEventStore,
    DjangoMessageStore,
    DjangoProfileStore,
    DjangoReviewStore,
)

ERROR_STATUS = {
    ErrorCode.INVALID_ID: status.HTTP_400_BAD_REQUEST,
    ErrorCode.VALIDATION_FAILED: status.HTTP_400_BAD_REQUEST,
    ErrorCode.NOT_AUTHORIZED: status.HTTP_403_FORBIDDEN,
    ErrorCode.EVENT_NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorCode.BAND_NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorCode.PROFILE_NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorCode.REQUEST_NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorCode.APPLICATION_NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorCode.NOT_A_MEMBER: status.HTTP_404_NOT_FOUND,
    ErrorCode.ALREADY_APPLIED: status.HTTP_409_CONFLICT,
    ErrorCode.ALREADY_REVIEWED: status.HTTP_409_CONFLICT,
    ErrorCode.REQUEST_ALREADY_RESOLVED: status.HTTP_409_CONFLICT,
    ErrorCode.REQUEST_ALREADY_PENDING: status.HTTP_409_CONFLICT,
    ErrorCode.PROFILE_EXISTS: status.HTTP_409_CONFLICT,
    ErrorCode.REVIEW_NOT_ALLOWED: status.HTTP_409_CONFLICT,
    ErrorCode.BACKEND_ERROR: status.HTTP_502_BAD_GATEWAY,
}


def error_response(error: DomainError) -> Response:
    message = error.message
    if error.code == ErrorCode.BACKEND_ERROR:
        message = "The request could not be completed"
    return Response(
        {"code": error.code.value, "message": message},
        status=ERROR_STATUS.get(error.code, status.HTTP_500_INTERNAL_SERVER_ERROR),
    )


def result_response(result, serializer_class=None, many=False, success=status.HTTP_200_OK):
    if result.error is not None:
        return error_response(result.error)
    if serializer_class is None:
        return Response(status=status.HTTP_204_NO_CONTENT)
    return Response(serializer_class(result.data, many=many).data, status=success)


def acting_user(request: Request) -> UserId:
    return UserId(request.user.pk)


def event_service() -> EventService:
    return EventService(
        DjangoEventStore(), DjangoBookingStore(), DjangoProfileStore(), DjangoBandStore()
    )


def application_service() -> ApplicationService:
    return ApplicationService(
        DjangoEventStore(),
        DjangoBookingStore(),
        DjangoProfileStore(),
        DjangoBandStore(),
        DjangoMessageStore(),
    )


def band_service() -> BandService:
    return BandService(DjangoBandStore(), DjangoBandRequestStore(), DjangoProfileStore())


def review_service() -> ReviewService:
    return ReviewService(
        DjangoReviewStore(), DjangoBookingStore(), DjangoEventStore(), DjangoProfileStore()
    )


def profile_service() -> ProfileService:
    return ProfileService(DjangoProfileStore())


def message_service() -> MessageService:
    return MessageService(DjangoMessageStore(), DjangoProfileStore())


class EventListView(APIView):
    """Handler for GET/POST /api/events"""

    permission_classes = [IsAuthenticatedOrReadOnly]

    def get(self, request: Request) -> Response:
        return result_response(event_service().get_events(), s.EventSerializer, many=True)

    def post(self, request: Request) -> Response:
        payload = s.EventWriteSerializer(data=request.data)
        payload.is_valid(raise_exception=True)
        result = event_service().create_event(acting_user(request), payload.validated_data)
        return result_response(result, s.EventSerializer, success=status.HTTP_201_CREATED)


class EventDetailView(APIView):
    """Handler for PATCH/DELETE /api/events/{event_id}"""

    permission_classes = [IsAuthenticated]

    def patch(self, request: Request, event_id: str) -> Response:
        payload = s.EventWriteSerializer(data=request.data, partial=True)
        payload.is_valid(raise_exception=True)
        result = event_service().update_event(
            acting_user(request), event_id, payload.validated_data
        )
        return result_response(result, s.EventSerializer)

    def delete(self, request: Request, event_id: str) -> Response:
        return result_response(event_service().delete_event(acting_user(request), event_id))


class EventApplyView(APIView):
    """Handler for POST /api/events/{event_id}/applications"""

    permission_classes = [IsAuthenticated]

    def post(self, request: Request, event_id: str) -> Response:
        payload = s.ApplicationCreateSerializer(data=request.data)
        payload.is_valid(raise_exception=True)
        data = payload.validated_data
        result = application_service().apply_for_event(
            acting_user(request),
            event_id,
            quotation=data.get("quotation"),
            additional_requirements=data.get("additional_requirements"),
            band_id=data.get("band_id"),
        )
        return result_response(result, s.BookingSerializer, success=status.HTTP_201_CREATED)


class MyEventListView(APIView):
    """Handler for GET /api/me/events"""

    permission_classes = [IsAuthenticated]

    def get(self, request: Request) -> Response:
        result = event_service().get_user_events(acting_user(request))
        return result_response(result, s.EventSerializer, many=True)


class MyEventApplicationListView(APIView):
    """Handler for GET /api/me/events/applications"""

    permission_classes = [IsAuthenticated]

    def get(self, request: Request) -> Response:
        service = event_service()
        events = service.get_user_events(acting_user(request))
        if events.error is not None:
            return error_response(events.error)
        result = service.get_event_applications(events.data)
        return result_response(result, s.EventApplicationSerializer, many=True)


class MyApplicationListView(APIView):
    """Handler for GET /api/me/applications"""

    permission_classes = [IsAuthenticated]

    def get(self, request: Request) -> Response:
        result = application_service().get_my_applications(acting_user(request))
        return result_response(result, s.BookingSerializer, many=True)


class ApplicationDetailView(APIView):
    """Handler for PATCH/DELETE /api/applications/{application_id}"""

    permission_classes = [IsAuthenticated]

    def patch(self, request: Request, application_id: str) -> Response:
        payload = s.ApplicationStatusSerializer(data=request.data)
        payload.is_valid(raise_exception=True)
        data = payload.validated_data
        result = event_service().update_application_status(
            acting_user(request),
            application_id,
            data["status"],
            scheduled_start=data.get("scheduled_start"),
            scheduled_end=data.get("scheduled_end"),
        )
        return result_response(result)

    def delete(self, request: Request, application_id: str) -> Response:
        result = application_service().withdraw_application(acting_user(request), application_id)
        return result_response(result)


class BandListView(APIView):
    """Handler for GET/POST /api/bands"""

    permission_classes = [IsAuthenticatedOrReadOnly]

    def get(self, request: Request) -> Response:
        return result_response(band_service().get_bands(), s.BandSerializer, many=True)

    def post(self, request: Request) -> Response:
        payload = s.BandCreateSerializer(data=request.data)
        payload.is_valid(raise_exception=True)
        result = band_service().create_band(
            acting_user(request),
            payload.validated_data["name"],
            payload.validated_data["description"],
        )
        return result_response(result, s.BandDetailSerializer, success=status.HTTP_201_CREATED)


class BandDetailView(APIView):
    """Handler for GET/DELETE /api/bands/{band_id}"""

    permission_classes = [IsAuthenticatedOrReadOnly]

    def get(self, request: Request, band_id: str) -> Response:
        return result_response(band_service().get_band(band_id), s.BandDetailSerializer)

    def delete(self, request: Request, band_id: str) -> Response:
        return result_response(band_service().disband_band(acting_user(request), band_id))


class MyBandListView(APIView):
    """Handler for GET /api/me/bands"""

    permission_classes = [IsAuthenticated]

    def get(self, request: Request) -> Response:
        result = band_service().get_user_bands(acting_user(request))
        return result_response(result, s.BandSerializer, many=True)


class BandJoinRequestView(APIView):
    """Handler for POST /api/bands/{band_id}/join-requests"""

    permission_classes = [IsAuthenticated]

    def post(self, request: Request, band_id: str) -> Response:
        payload = s.JoinRequestSerializer(data=request.data)
        payload.is_valid(raise_exception=True)
        result = band_service().send_join_request(
            acting_user(request), band_id, payload.validated_data.get("message")
        )
        return result_response(result, s.BandRequestSerializer, success=status.HTTP_201_CREATED)


class BandInviteView(APIView):
    """Handler for POST /api/bands/{band_id}/invites"""

    permission_classes = [IsAuthenticated]

    def post(self, request: Request, band_id: str) -> Response:
        payload = s.InviteSerializer(data=request.data)
        payload.is_valid(raise_exception=True)
        result = band_service().send_invite_request(
            acting_user(request),
            band_id,
            UserId(payload.validated_data["musician_user_id"]),
            payload.validated_data.get("message"),
        )
        return result_response(result, s.BandRequestSerializer, success=status.HTTP_201_CREATED)


class BandLeaveView(APIView):
    """Handler for POST /api/bands/{band_id}/leave"""

    permission_classes = [IsAuthenticated]

    def post(self, request: Request, band_id: str) -> Response:
        return result_response(band_service().leave_band(acting_user(request), band_id))


class BandTransferLeadershipView(APIView):
    """Handler for POST /api/bands/{band_id}/transfer-leadership"""

    permission_classes = [IsAuthenticated]

    def post(self, request: Request, band_id: str) -> Response:
        payload = s.TransferLeadershipSerializer(data=request.data)
        payload.is_valid(raise_exception=True)
        result = band_service().transfer_leadership(
            acting_user(request), band_id, UserId(payload.validated_data["new_leader_user_id"])
        )
        return result_response(result)


class BandMemberView(APIView):
    """Handler for DELETE /api/bands/{band_id}/members/{user_id}"""

    permission_classes = [IsAuthenticated]

    def delete(self, request: Request, band_id: str, user_id: int) -> Response:
        result = band_service().remove_member(acting_user(request), band_id, UserId(user_id))
        return result_response(result)


class MyBandRequestListView(APIView):
    """Handler for GET /api/me/band-requests"""

    permission_classes = [IsAuthenticated]

    def get(self, request: Request) -> Response:
        result = band_service().get_pending_requests(acting_user(request))
        return result_response(result, s.BandRequestSerializer, many=True)


class LedBandRequestListView(APIView):
    """Handler for GET /api/me/led-band-requests"""

    permission_classes = [IsAuthenticated]

    def get(self, request: Request) -> Response:
        result = band_service().get_band_requests(acting_user(request))
        return result_response(result, s.BandRequestSerializer, many=True)


class BandRequestAcceptView(APIView):
    """Handler for POST /api/band-requests/{request_id}/accept"""

    permission_classes = [IsAuthenticated]

    def post(self, request: Request, request_id: str) -> Response:
        return result_response(band_service().accept_request(acting_user(request), request_id))


class BandRequestRejectView(APIView):
    """Handler for POST /api/band-requests/{request_id}/reject"""

    permission_classes = [IsAuthenticated]

    def post(self, request: Request, request_id: str) -> Response:
        return result_response(band_service().reject_request(acting_user(request), request_id))


class ProfileReviewListView(APIView):
    """Handler for GET/POST /api/profiles/{profile_id}/reviews"""

    permission_classes = [IsAuthenticatedOrReadOnly]

    def get(self, request: Request, profile_id: str) -> Response:
        result = review_service().get_reviews(profile_id)
        return result_response(result, s.ReviewSummarySerializer)

    def post(self, request: Request, profile_id: str) -> Response:
        payload = s.ReviewCreateSerializer(data=request.data)
        payload.is_valid(raise_exception=True)
        result = review_service().submit_review(
            acting_user(request),
            profile_id,
            payload.validated_data["rating"],
            payload.validated_data.get("comment"),
        )
        return result_response(result, s.ReviewSerializer, success=status.HTTP_201_CREATED)


class MyProfileView(APIView):
    """Handler for GET/POST/PATCH /api/me/profile"""

    permission_classes = [IsAuthenticated]

    def get(self, request: Request) -> Response:
        result = profile_service().get_my_profile(acting_user(request))
        return result_response(result, s.ProfileSerializer)

    def post(self, request: Request) -> Response:
        payload = s.ProfileCreateSerializer(data=request.data)
        payload.is_valid(raise_exception=True)
        data = dict(payload.validated_data)
        role = data.pop("role")
        result = profile_service().create_profile(acting_user(request), role, data)
        return result_response(result, s.ProfileSerializer, success=status.HTTP_201_CREATED)

    def patch(self, request: Request) -> Response:
        payload = s.ProfileUpdateSerializer(data=request.data, partial=True)
        payload.is_valid(raise_exception=True)
        result = profile_service().update_profile(acting_user(request), payload.validated_data)
        return result_response(result, s.ProfileSerializer)


class ProfileDetailView(APIView):
    """Handler for GET /api/profiles/{profile_id}"""

    permission_classes = [IsAuthenticatedOrReadOnly]

    def get(self, request: Request, profile_id: str) -> Response:
        return result_response(profile_service().get_profile(profile_id), s.ProfileSerializer)


class MusicianListView(APIView):
    """Handler for GET /api/musicians?search=&genre=&price_range="""

    permission_classes = [IsAuthenticatedOrReadOnly]

    def get(self, request: Request) -> Response:
        result = profile_service().list_musicians(
            search=request.query_params.get("search"),
            genre=request.query_params.get("genre"),
            price_range=request.query_params.get("price_range"),
        )
        return result_response(result, s.ProfileSerializer, many=True)


class MyConversationListView(APIView):
    """Handler for GET /api/me/messages"""

    permission_classes = [IsAuthenticated]

    def get(self, request: Request) -> Response:
        result = message_service().get_conversations(acting_user(request))
        return result_response(result, s.ConversationSerializer, many=True)


class ConversationView(APIView):
    """Handler for GET/POST /api/me/messages/{profile_id}"""

    permission_classes = [IsAuthenticated]

    def get(self, request: Request, profile_id: str) -> Response:
        result = message_service().get_conversation(acting_user(request), profile_id)
        return result_response(result, s.ConversationDetailSerializer)

    def post(self, request: Request, profile_id: str) -> Response:
        payload = s.MessageCreateSerializer(data=request.data)
        payload.is_valid(raise_exception=True)
        result = message_service().send_message(
            acting_user(request),
            profile_id,
            payload.validated_data["content"],
            topic=payload.validated_data["topic"],
        )
        return result_response(result, s.MessageSerializer, success=status.HTTP_201_CREATED)
