from rest_framework.routers import DefaultRouter

from modules.orders.views import OrderViewSet

# Detail actions (status/, cancel/, review/) and the collection actions
# (calculate-price/, number/<order_number>/) are declared on the viewset.
router = DefaultRouter(trailing_slash=True)
router.register("orders", OrderViewSet, basename="order")

urlpatterns = router.urls
