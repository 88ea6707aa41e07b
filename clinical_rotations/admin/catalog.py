"""
Admin for programs, clinical sites, rotation templates and cohorts.
"""

from django.contrib import admin

from ..models import ClinicalSite, Cohort, CohortMembership, Program, RotationTemplate


class RotationTemplateInline(admin.TabularInline):
    """Inline Admin for the rotation templates of a program."""

    model = RotationTemplate
    extra = 0
    fields = ("name", "specialty", "default_duration_weeks", "default_required_hours", "is_active", "sort_order")
    show_change_link = True


@admin.register(Program)
class ProgramAdmin(admin.ModelAdmin):
    """Admin for Program."""

    list_display = ("name", "school", "is_active", "created")
    list_filter = ("school", "is_active")
    search_fields = ("name", "school")
    inlines = [RotationTemplateInline]


@admin.register(ClinicalSite)
class ClinicalSiteAdmin(admin.ModelAdmin):
    """Admin for Clinical Site."""

    list_display = ("name", "site_type", "capacity", "is_active")
    list_filter = ("site_type", "is_active")
    search_fields = ("name",)


@admin.register(RotationTemplate)
class RotationTemplateAdmin(admin.ModelAdmin):
    """Admin for Rotation Template."""

    list_display = (
        "name",
        "program",
        "specialty",
        "default_duration_weeks",
        "default_required_hours",
        "default_clinical_site",
        "is_active",
    )
    list_filter = ("program", "specialty", "is_active")
    search_fields = ("name", "specialty", "program__name")
    autocomplete_fields = ["program", "default_clinical_site"]


class CohortMembershipInline(admin.TabularInline):
    """Inline Admin for the students of a cohort."""

    model = CohortMembership
    extra = 0
    raw_id_fields = ("user",)
    fields = ("user", "enrolled_at", "is_active")


@admin.register(Cohort)
class CohortAdmin(admin.ModelAdmin):
    """Admin for Cohort."""

    list_display = ("name", "program", "graduation_year", "start_date", "end_date", "get_student_count", "is_active")
    list_filter = ("program", "graduation_year", "is_active")
    search_fields = ("name", "program__name")
    autocomplete_fields = ["program"]
    inlines = [CohortMembershipInline]

    def get_student_count(self, obj):
        """Get the number of active students in the cohort."""
        return obj.memberships.filter(is_active=True).count()

    get_student_count.short_description = "Students"
