from rest_framework.permissions import BasePermission

# ------------------------------------------------------------
# Lehrkräfte sind Staff-Benutzer; alle anderen authentifizierten
# Benutzer gelten als Studierende.
# ------------------------------------------------------------


def is_teacher(user) -> bool:
    return bool(user and user.is_authenticated and user.is_staff)


class IsTeacher(BasePermission):
    """Erlaubt den Zugriff nur Lehrkräften."""

    def has_permission(self, request, view):
        return is_teacher(request.user)


class IsAssignmentOwnerOrTeacher(BasePermission):
    """Ein Versuch ist nur für den Studierenden selbst und Lehrkräfte sichtbar."""

    def has_permission(self, request, view):
        return bool(request.user and request.user.is_authenticated)

    def has_object_permission(self, request, view, obj):
        if is_teacher(request.user):
            return True
        return obj.student_id == request.user.id
