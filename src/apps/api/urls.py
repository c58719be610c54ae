"""
URL patterns for REST API.
"""
from django.urls import path

from . import views

app_name = 'api'

urlpatterns = [
    # Authentication
    path('login/', views.api_login, name='api_login'),
    path('logout/', views.api_logout, name='api_logout'),

    # Products
    path('products/', views.products, name='products'),
    path('products/toggle/', views.product_toggle, name='product_toggle'),
    path('catalog/', views.catalog, name='catalog'),

    # Lookups
    path('suppliers/', views.suppliers, name='suppliers'),
    path('tags/', views.tags, name='tags'),
    path('categories/', views.categories, name='categories'),

    # Salespeople
    path('salespeople/', views.salespeople, name='salespeople'),
    path('sales/seed/', views.seed_sales, name='seed_sales'),

    # Export
    path('export/products/', views.export_products, name='export_products'),
]
