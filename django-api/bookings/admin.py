from django.contrib import admin

from bookings.models import Booking, Experience, PromoCode, Slot


class SlotInline(admin.TabularInline):
    model = Slot
    extra = 1
    readonly_fields = ["booked_count"]


@admin.register(Experience)
class ExperienceAdmin(admin.ModelAdmin):
    list_display = ["title", "location", "base_price", "created_at"]
    search_fields = ["title", "location"]
    inlines = [SlotInline]


@admin.register(Slot)
class SlotAdmin(admin.ModelAdmin):
    list_display = ["experience", "starts_at", "total_capacity", "booked_count"]
    list_filter = ["experience"]
    readonly_fields = ["booked_count"]


@admin.register(PromoCode)
class PromoCodeAdmin(admin.ModelAdmin):
    list_display = ["code", "discount_type", "discount_value", "is_active", "used_count", "usage_limit"]
    list_filter = ["is_active", "discount_type"]
    search_fields = ["code"]
    readonly_fields = ["used_count"]


@admin.register(Booking)
class BookingAdmin(admin.ModelAdmin):
    list_display = ["customer_name", "customer_email", "slot", "quantity", "total_price", "status"]
    list_filter = ["status", "experience"]
    search_fields = ["customer_email", "customer_name"]
    readonly_fields = ["total_price", "promo_code"]
