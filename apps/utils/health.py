from django.http import JsonResponse
from django.db import connection, DatabaseError


def health_check(request):
    """
    Liveness for load balancers. 503 only when the database is unreachable;
    an unseeded catalog is reported but still counts as up.
    """
    from apps.catalog.models import Product

    components = {"db": "unknown", "catalog": "unknown"}
    try:
        with connection.cursor() as cursor:
            cursor.execute("SELECT 1")
        components["db"] = "ok"

        components["catalog"] = "ok" if Product.objects.exists() else "empty"
    except DatabaseError as e:
        components["db"] = "error"
        return JsonResponse(
            {"status": "error", "detail": str(e), "components": components},
            status=503
        )

    return JsonResponse({"status": "ok", "components": components}, status=200)
