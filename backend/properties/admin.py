from django.contrib import admin

from .models import Property


@admin.register(Property)
class PropertyAdmin(admin.ModelAdmin):
    list_display = ("name", "address", "price", "rating", "bedrooms", "bathrooms", "agent")
    list_filter = ("bedrooms", "bathrooms")
    search_fields = ("name", "address", "agent__email")
