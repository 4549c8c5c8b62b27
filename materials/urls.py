from rest_framework.routers import DefaultRouter

from .views import MaterialViewSet

router = DefaultRouter(trailing_slash=False)
router.include_root_view = False
router.register(r"", MaterialViewSet, basename="materials")

urlpatterns = router.urls
