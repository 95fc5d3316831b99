from django.contrib import admin
from django.contrib.auth.admin import UserAdmin as DjangoUserAdmin
from django.utils.translation import gettext_lazy as _

from books_core.models import Company, EntityMembership, User

from .forms import UserAdminChangeForm, UserAdminCreationForm
from .mixins import TenantAdminMixin

MANAGER_ROLES = ("owner", "admin")


@admin.register(Company)
class CompanyAdmin(admin.ModelAdmin):
    list_display = ("id", "name", "slug", "currency_code", "gstin", "created_at")
    search_fields = ("name", "slug", "gstin")
    ordering = ("name",)

    def get_queryset(self, request):
        qs = super().get_queryset(request)
        if request.user.is_superuser:
            return qs
        # only companies the staff user belongs to
        return qs.filter(memberships__user=request.user).distinct()


@admin.register(User)
class UserAdmin(DjangoUserAdmin):
    add_form = UserAdminCreationForm
    form = UserAdminChangeForm
    model = User

    list_display = ("username", "email", "get_full_name", "is_staff", "default_company")
    list_filter = ("is_staff", "is_superuser", "is_active")
    search_fields = ("username", "email", "first_name", "last_name")
    ordering = ("username",)

    fieldsets = (
        (None, {"fields": ("username", "password")}),
        (_("Personal info"), {"fields": ("first_name", "last_name", "email", "phone")}),
        (_("Company / Defaults"), {"fields": ("default_company",)}),
        (
            _("Permissions"),
            {"fields": ("is_active", "is_staff", "is_superuser", "groups", "user_permissions")},
        ),
        (_("Important dates"), {"fields": ("last_login", "date_joined")}),
    )

    add_fieldsets = (
        (
            None,
            {
                "classes": ("wide",),
                "fields": ("username", "email", "default_company", "password1", "password2"),
            },
        ),
    )

    # limit visible users to those sharing a company with request.user
    def get_queryset(self, request):
        qs = super().get_queryset(request)
        if request.user.is_superuser:
            return qs
        allowed_company_ids = request.user.memberships.values_list("company_id", flat=True)
        return qs.filter(memberships__company_id__in=allowed_company_ids).distinct()


@admin.register(EntityMembership)
class EntityMembershipAdmin(TenantAdminMixin, admin.ModelAdmin):
    list_display = ("user", "company", "role", "is_active", "created_at")
    list_filter = ("role", "is_active", "company")
    search_fields = ("user__username", "user__email", "company__name")
    readonly_fields = ("created_at",)
    ordering = ("company__name", "user__username")

    def get_queryset(self, request):
        return super().get_queryset(request).select_related("company", "user")

    # Only owners / admins of a company may change its memberships
    def has_change_permission(self, request, obj=None):
        if request.user.is_superuser:
            return True
        managed = set(
            request.user.memberships.filter(role__in=MANAGER_ROLES).values_list(
                "company_id", flat=True
            )
        )
        if obj is None:
            return bool(managed)
        return obj.company_id in managed

    def has_delete_permission(self, request, obj=None):
        return self.has_change_permission(request, obj)

    def has_add_permission(self, request):
        if request.user.is_superuser:
            return True
        return request.user.memberships.filter(role__in=MANAGER_ROLES).exists()
