from django.contrib import admin

from .models import Employee, EmployeeDocument


class EmployeeDocumentInline(admin.TabularInline):
    model = EmployeeDocument
    extra = 0
    fields = ("document_type", "file_name", "document_number", "expiry_date", "uploaded_by", "created_at")
    readonly_fields = ("file_name", "uploaded_by", "created_at")


@admin.register(Employee)
class EmployeeAdmin(admin.ModelAdmin):
    list_display = (
        "employee_id",
        "name",
        "company_name",
        "department",
        "visa_expiry_date",
        "visa_status",
        "is_active",
    )
    list_filter = ("visa_status", "is_active", "company_name", "nationality")
    search_fields = ("employee_id", "name", "email", "passport_number")
    readonly_fields = ("visa_status", "created_at", "updated_at", "created_by", "updated_by")
    inlines = [EmployeeDocumentInline]

    def save_model(self, request, obj, form, change):
        if not change:
            obj.created_by = request.user
        obj.updated_by = request.user
        super().save_model(request, obj, form, change)


@admin.register(EmployeeDocument)
class EmployeeDocumentAdmin(admin.ModelAdmin):
    list_display = ("employee", "document_type", "file_name", "expiry_date", "created_at")
    list_filter = ("document_type",)
    search_fields = ("employee__employee_id", "employee__name", "file_name", "document_number")
    raw_id_fields = ("employee",)
