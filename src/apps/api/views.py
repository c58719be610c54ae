"""
REST API views for the storefront.
Provides JSON endpoints for the catalog, the cart page and the admin panel.
"""
import json
import logging

from django.conf import settings
from django.http import HttpResponse, JsonResponse
from django.utils import timezone
from django.utils.crypto import constant_time_compare
from django.views.decorators.csrf import csrf_exempt
from django.views.decorators.http import require_GET, require_http_methods, require_POST

from apps.catalog import browse
from apps.catalog.entities import ProductStatus
from apps.catalog.export import ProductExporter
from apps.catalog.repositories import (
    CategoryRepository,
    ProductRepository,
    SalespersonRepository,
    SupplierRepository,
    TagRepository,
)
from apps.core.exceptions import EntityNotFound, InvalidInput, StorageNotConfigured
from apps.core.storage import get_storage_backend

logger = logging.getLogger(__name__)

AUTH_COOKIE = 'auth'


def json_response(data, status=200):
    """Return data (dict or list) as JSON."""
    return JsonResponse(data, status=status, safe=False)


def api_error(message, status=400):
    """Return error JSON response."""
    return JsonResponse({'error': message, 'success': False}, status=status)


def parse_body(request) -> dict:
    """Decode a JSON object body; raises InvalidInput on anything else."""
    try:
        body = json.loads(request.body) if request.body else {}
    except json.JSONDecodeError:
        raise InvalidInput('Invalid JSON body')
    if not isinstance(body, dict):
        raise InvalidInput('Invalid JSON body')
    return body


def storage_error_response(exc, action):
    """Map storefront errors onto HTTP responses."""
    if isinstance(exc, InvalidInput):
        return api_error(str(exc), 400)
    if isinstance(exc, EntityNotFound):
        return api_error(str(exc), 404)
    if isinstance(exc, StorageNotConfigured):
        logger.error(f'{action}: {exc}')
        return api_error(str(exc), 500)
    logger.exception(f'{action}: {exc}')
    return api_error(f'{action}: {str(exc)}', 500)


def _missing(body, *fields):
    return [f for f in fields if body.get(f) in (None, '')]


# ============= Products API =============

@csrf_exempt
@require_http_methods(['GET', 'POST', 'PUT', 'DELETE'])
def products(request):
    """
    Products collection.

    GET query params:
        - published: Only published products (1/true)
        - q: Search in title
        - category: Category id (repeatable)
        - min_price / max_price: Price range (CTN)
        - sort: relevance, price_asc, price_desc, title_asc
    POST: add a product ({title, price, ...}).
    PUT: full update ({id, title, price, ...}).
    DELETE: ?id=<product id>
    """
    repo = ProductRepository(get_storage_backend())

    if request.method == 'GET':
        try:
            query = browse.CatalogQuery.from_params(request.GET)
        except InvalidInput as e:
            return api_error(str(e))
        items = browse.filter_products(repo.get_all(), query)
        return json_response([p.to_record() for p in items])

    if request.method == 'DELETE':
        product_id = request.GET.get('id')
        if not product_id:
            return api_error('Missing product id')
        try:
            deleted = repo.delete(product_id)
        except Exception as e:
            return storage_error_response(e, 'Failed to delete product')
        if not deleted:
            return api_error('Product not found', 404)
        return json_response({'success': True})

    try:
        body = parse_body(request)
        required = ('id', 'title', 'price') if request.method == 'PUT' else ('title', 'price')
        missing = _missing(body, *required)
        if missing:
            return api_error(f'Missing required fields: {", ".join(missing)}')

        if request.method == 'PUT':
            product = repo.update(body)
            return json_response(product.to_record())

        product = repo.add(body)
        return json_response(product.to_record(), status=201)
    except Exception as e:
        action = 'Failed to update product' if request.method == 'PUT' else 'Failed to add product'
        return storage_error_response(e, action)


@csrf_exempt
@require_POST
def product_toggle(request):
    """Publish or archive a product: {id, status}."""
    try:
        body = parse_body(request)
        product_id = body.get('id')
        status = body.get('status')
        if not product_id or status not in ProductStatus.values:
            return api_error('Missing id or invalid status')

        product = ProductRepository(get_storage_backend()).set_status(product_id, status)
        if product is None:
            return api_error('Product not found', 404)
        return json_response(product.to_record())
    except Exception as e:
        return storage_error_response(e, 'Failed to update status')


@require_GET
def catalog(request):
    """
    Public catalog payload: published products plus the lookups the
    catalog page filters by.
    """
    storage = get_storage_backend()
    items = browse.published(ProductRepository(storage).get_all())
    categories = CategoryRepository(storage).get_all()
    tags = TagRepository(storage).get_all()

    return json_response({
        'products': [p.to_record() for p in items],
        'categories': [c.to_record() for c in categories],
        'tags': [t.to_record() for t in tags],
        'categoryCounts': browse.category_counts(items),
        'maxPrice': browse.max_price(items),
    })


# ============= Named lookups API =============

def _named_collection(request, repository_class, label):
    repo = repository_class(get_storage_backend())

    if request.method == 'GET':
        return json_response([e.to_record() for e in repo.get_all()])

    try:
        body = parse_body(request)
        name = body.get('name')
        if not name or not isinstance(name, str) or not name.strip():
            return api_error(f'Missing {label} name')
        entity = repo.add(name.strip())
        return json_response(entity.to_record(), status=201)
    except Exception as e:
        return storage_error_response(e, f'Failed to add {label}')


@csrf_exempt
@require_http_methods(['GET', 'POST'])
def suppliers(request):
    """List suppliers or add one: {name}."""
    return _named_collection(request, SupplierRepository, 'supplier')


@csrf_exempt
@require_http_methods(['GET', 'POST'])
def tags(request):
    """List tags or add one: {name}."""
    return _named_collection(request, TagRepository, 'tag')


@csrf_exempt
@require_http_methods(['GET', 'POST'])
def categories(request):
    """List categories or add one: {name}."""
    return _named_collection(request, CategoryRepository, 'category')


# ============= Salespeople API =============

@csrf_exempt
@require_http_methods(['GET', 'POST'])
def salespeople(request):
    """List salespeople or add one: {name, phone}."""
    repo = SalespersonRepository(get_storage_backend())

    if request.method == 'GET':
        return json_response([s.to_record() for s in repo.get_all()])

    try:
        body = parse_body(request)
        if _missing(body, 'name'):
            return api_error('Missing salesperson name')
        person = repo.add(body['name'], body.get('phone', ''))
        return json_response(person.to_record(), status=201)
    except Exception as e:
        return storage_error_response(e, 'Failed to add salesperson')


@csrf_exempt
@require_http_methods(['GET', 'POST'])
def seed_sales(request):
    """Add the configured default salesperson (idempotent)."""
    try:
        person = SalespersonRepository(get_storage_backend()).add(
            settings.STOREFRONT_SALES_NAME,
            settings.STOREFRONT_SALES_PHONE,
        )
    except Exception as e:
        return storage_error_response(e, 'Failed to seed sales')

    status = 201 if request.method == 'POST' else 200
    return json_response(person.to_record(), status=status)


# ============= Export API =============

@require_GET
def export_products(request):
    """
    Export the catalog.

    Query params:
        - format: xlsx (default) or csv
    """
    export_format = request.GET.get('format', 'xlsx')
    if export_format not in ('xlsx', 'csv'):
        return api_error(f'Unknown export format: {export_format}')

    storage = get_storage_backend()
    exporter = ProductExporter(
        suppliers=SupplierRepository(storage).get_all(),
        tags=TagRepository(storage).get_all(),
        categories=CategoryRepository(storage).get_all(),
    )
    items = ProductRepository(storage).get_all()
    stamp = timezone.now().strftime('%Y%m%d_%H%M')

    if export_format == 'csv':
        response = HttpResponse(exporter.export_csv(items), content_type='text/csv; charset=utf-8')
        filename = f'products_{stamp}.csv'
    else:
        response = HttpResponse(
            exporter.export_xlsx(items),
            content_type='application/vnd.openxmlformats-officedocument.spreadsheetml.sheet',
        )
        filename = f'products_{stamp}.xlsx'

    response['Content-Disposition'] = f'attachment; filename="{filename}"'
    return response


# ============= Authentication API =============

@csrf_exempt
@require_POST
def api_login(request):
    """Check the admin credentials and set the auth cookie."""
    try:
        body = parse_body(request)
    except InvalidInput as e:
        return api_error(str(e))

    username = str(body.get('username') or '')
    password = str(body.get('password') or '')

    if not username or not password:
        return api_error('Username and password are required')

    valid = (
        constant_time_compare(username, settings.STOREFRONT_ADMIN_USERNAME)
        and constant_time_compare(password, settings.STOREFRONT_ADMIN_PASSWORD)
    )
    if not valid:
        return api_error('Invalid credentials', 401)

    response = JsonResponse({'success': True})
    response.set_cookie(AUTH_COOKIE, 'true', path='/', samesite='Lax')
    return response


@csrf_exempt
@require_POST
def api_logout(request):
    """Clear the auth cookie."""
    response = JsonResponse({'success': True})
    response.delete_cookie(AUTH_COOKIE, path='/')
    return response
