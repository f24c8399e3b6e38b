"""
OpenAPI schema settings for drf-spectacular.

The schema documents both ways a caller can identify itself: the
``X-User-ID`` header set by the gateway and a bearer JWT.
"""
from typing import Any, Dict, List

UNDOCUMENTED_PATHS = ('/health/', '/ready/')

API_TAGS = [
    {'name': 'profiles', 'description': 'Profiles, traits, avatars and certifications'},
    {'name': 'work-history', 'description': 'Positions, flight records, achievements and ratings'},
    {'name': 'search', 'description': 'Filtered search, statistics and similar professionals'},
    {'name': 'payroll', 'description': 'Payroll generation, payouts and history'},
]

SECURITY_SCHEMES = {
    'GatewayUser': {
        'type': 'apiKey',
        'in': 'header',
        'name': 'X-User-ID',
        'description': 'User id forwarded by the API gateway.',
    },
    'BearerAuth': {
        'type': 'http',
        'scheme': 'bearer',
        'bearerFormat': 'JWT',
    },
}


def build_spectacular_settings(title: str, description: str, version: str = '1.0.0') -> Dict[str, Any]:
    return {
        'TITLE': title,
        'DESCRIPTION': description,
        'VERSION': version,
        'SERVE_INCLUDE_SCHEMA': False,
        'COMPONENT_SPLIT_REQUEST': True,
        'SCHEMA_PATH_PREFIX': r'/api/v[0-9]+/',
        'TAGS': API_TAGS,
        'SECURITY': [{name: []} for name in SECURITY_SCHEMES],
        'PREPROCESSING_HOOKS': ['common.openapi.skip_probe_endpoints'],
        'POSTPROCESSING_HOOKS': [
            'drf_spectacular.hooks.postprocess_schema_enums',
            'common.openapi.add_security_schemes',
        ],
        'SWAGGER_UI_SETTINGS': {'persistAuthorization': True},
    }


def skip_probe_endpoints(endpoints: List, **kwargs) -> List:
    """Drop liveness and readiness probes from the schema."""
    return [
        endpoint for endpoint in endpoints
        if not endpoint[0].endswith(UNDOCUMENTED_PATHS)
    ]


def add_security_schemes(result: Dict, **kwargs) -> Dict:
    result.setdefault('components', {})['securitySchemes'] = SECURITY_SCHEMES
    return result


def get_api_docs_urlpatterns():
    """Schema at ``api/schema/``, Swagger UI at ``api/docs/``."""
    from django.urls import path
    from drf_spectacular.views import SpectacularAPIView, SpectacularSwaggerView

    return [
        path('api/schema/', SpectacularAPIView.as_view(), name='schema'),
        path('api/docs/', SpectacularSwaggerView.as_view(url_name='schema'), name='swagger-ui'),
    ]


PROFILE_SERVICE_OPENAPI = build_spectacular_settings(
    title='Aviation Profile Service API',
    description=(
        'Professional profiles and work history for aviation staff, '
        'professional search and payroll.'
    ),
)
