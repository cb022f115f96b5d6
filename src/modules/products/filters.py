import django_filters

from modules.products.models import Product


class ProductFilter(django_filters.FilterSet):
    reference = django_filters.CharFilter(field_name="reference", lookup_expr="iexact")
    name = django_filters.CharFilter(field_name="name_en", lookup_expr="icontains")
    size = django_filters.CharFilter(field_name="size", lookup_expr="iexact")
    min_price = django_filters.NumberFilter(field_name="price", lookup_expr="gte")
    max_price = django_filters.NumberFilter(field_name="price", lookup_expr="lte")
    active = django_filters.BooleanFilter(field_name="is_active")

    class Meta:
        model = Product
        fields = ["reference", "name", "size", "min_price", "max_price", "active"]
