from django.contrib import admin

from .models import Order, Product


class OrderInline(admin.TabularInline):
    model = Order
    extra = 0
    fields = ("buyer", "status", "order_date")
    readonly_fields = ("buyer", "status", "order_date")
    can_delete = False


@admin.register(Product)
class ProductAdmin(admin.ModelAdmin):
    list_display = ("name", "seller", "price", "category", "condition", "is_sold", "created_at")
    list_filter = ("category", "condition", "is_sold", "created_at")
    search_fields = ("name", "description", "seller__username")
    readonly_fields = ("id", "seller", "created_at", "updated_at")
    inlines = [OrderInline]


@admin.register(Order)
class OrderAdmin(admin.ModelAdmin):
    list_display = ("id", "buyer", "product", "status", "order_date")
    list_filter = ("status", "order_date")
    search_fields = ("buyer__username", "product__name")
    readonly_fields = ("id", "buyer", "product", "order_date", "updated_at")
