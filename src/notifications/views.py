"""HTTP trigger for the visa reminder pipeline."""
import logging

from django.utils import timezone
from rest_framework import serializers, status
from rest_framework.response import Response
from rest_framework.views import APIView

from api.v1.permissions import IsAdminOrScheduler
from notifications.tasks import run_visa_notifications

logger = logging.getLogger("visatrack")


class TriggerSerializer(serializers.Serializer):
    manual = serializers.BooleanField(required=False, default=False)
    interval = serializers.IntegerField(required=False, allow_null=True, min_value=0, default=None)
    employeeId = serializers.CharField(required=False, allow_null=True, allow_blank=True, default=None)


class SendVisaNotificationsView(APIView):
    """POST {manual?, interval?, employeeId?} runs one scan-and-dispatch pass.

    Callable by admin profiles, or by the scheduler with the
    ``X-Scheduler-Token`` header.
    """

    permission_classes = [IsAdminOrScheduler]

    def post(self, request):
        serializer = TriggerSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        manual = data["manual"]
        employee_id = data["employeeId"]
        interval = data["interval"]
        logger.info(
            "Visa notification run requested (manual=%s, employeeId=%s, interval=%s)",
            manual, employee_id, interval,
        )

        try:
            summary = run_visa_notifications(
                manual=manual,
                employee_ids=[employee_id] if manual and employee_id else None,
                days=[interval] if interval is not None else None,
            )
        except Exception as exc:
            logger.exception("Fatal error in visa notification run")
            return Response(
                {
                    "success": False,
                    "error": str(exc),
                    "timestamp": timezone.now().isoformat(),
                },
                status=status.HTTP_500_INTERNAL_SERVER_ERROR,
            )

        if not summary.total:
            message = "No visa expiry notifications needed at this time"
        else:
            message = (
                f"Visa expiry notifications processed: {summary.successful} sent, "
                f"{summary.failures} failed"
            )
        return Response(
            {
                "success": True,
                "message": message,
                "summary": summary.as_dict(),
                "results": [result.as_dict() for result in summary.results],
            }
        )
