from django.contrib import admin
from django.urls import include, path
from rest_framework.routers import DefaultRouter
from rest_framework_simplejwt.views import TokenRefreshView

from accounts.api import (
    ChangePasswordView,
    LoginView,
    MeView,
    RegisterView,
)
from bookings.api import BookingListView, CheckoutView
from payments.api import CreatePaymentIntentView, PayView
from properties.api import PropertyViewSet

router = DefaultRouter()
router.register(r"properties", PropertyViewSet, basename="property")

urlpatterns = [
    path("admin/", admin.site.urls),
    path("api/auth/register/", RegisterView.as_view(), name="auth-register"),
    path("api/auth/login/", LoginView.as_view(), name="auth-login"),
    path("api/auth/refresh/", TokenRefreshView.as_view(), name="auth-refresh"),
    path(
        "api/auth/change-password/",
        ChangePasswordView.as_view(),
        name="auth-change-password",
    ),
    path("api/auth/me/", MeView.as_view(), name="auth-me"),
    path(
        "api/properties/<int:property_id>/checkout/",
        CheckoutView.as_view(),
        name="property-checkout",
    ),
    path("api/bookings/", BookingListView.as_view(), name="booking-list"),
    path("api/stripe/create/", CreatePaymentIntentView.as_view(), name="stripe-create"),
    path("api/stripe/pay/", PayView.as_view(), name="stripe-pay"),
    path("api/", include(router.urls)),
]
