from pathlib import Path

from decouple import Csv, config

BASE_DIR = Path(__file__).resolve().parent.parent.parent

# Core security
SECRET_KEY = config("SECRET_KEY", default="dev-secret-key-change-me")

# Hosts and CORS
ALLOWED_HOSTS = config("ALLOWED_HOSTS", default="localhost,127.0.0.1", cast=Csv())
CORS_ALLOW_ALL_ORIGINS = config("CORS_ALLOW_ALL_ORIGINS", default=True, cast=bool)
CORS_ALLOWED_ORIGINS = config("CORS_ALLOWED_ORIGINS", default="", cast=Csv())
CORS_ALLOW_CREDENTIALS = config("CORS_ALLOW_CREDENTIALS", default=True, cast=bool)
CSRF_TRUSTED_ORIGINS = config("CSRF_TRUSTED_ORIGINS", default="", cast=Csv())

INSTALLED_APPS = [
    "django.contrib.auth",
    "django.contrib.contenttypes",
    "django.contrib.sessions",
    "django.contrib.staticfiles",
    # Third-party
    "rest_framework",
    "drf_spectacular",
    "corsheaders",
    "rest_framework_simplejwt.token_blacklist",
    # Local
    "users",
    "catalog",
    "cart",
    "orders",
    "locations",
]

MIDDLEWARE = [
    "django.middleware.security.SecurityMiddleware",
    "corsheaders.middleware.CorsMiddleware",
    "whitenoise.middleware.WhiteNoiseMiddleware",
    "django.contrib.sessions.middleware.SessionMiddleware",
    "django.middleware.common.CommonMiddleware",
    "django.middleware.csrf.CsrfViewMiddleware",
    "django.contrib.auth.middleware.AuthenticationMiddleware",
    "django.middleware.clickjacking.XFrameOptionsMiddleware",
]

ROOT_URLCONF = "config.urls"

TEMPLATES = [
    {
        "BACKEND": "django.template.backends.django.DjangoTemplates",
        "DIRS": [],
        "APP_DIRS": True,
        "OPTIONS": {
            "context_processors": [
                "django.template.context_processors.debug",
                "django.template.context_processors.request",
                "django.contrib.auth.context_processors.auth",
            ],
        },
    },
]

WSGI_APPLICATION = "config.wsgi.application"
ASGI_APPLICATION = "config.asgi.application"

# Database: accounts and the token blacklist only; orders and profiles live in the record store
DB_ENGINE = config("DATABASE_ENGINE", default="sqlite")
if DB_ENGINE.lower() == "postgres":
    DATABASES = {
        "default": {
            "ENGINE": "django.db.backends.postgresql",
            "NAME": config("DATABASE_NAME", default="postgres"),
            "USER": config("DATABASE_USER", default="postgres"),
            "PASSWORD": config("DATABASE_PASSWORD", default=""),
            "HOST": config("DATABASE_HOST", default="localhost"),
            "PORT": config("DATABASE_PORT", default="5432"),
        }
    }
else:
    DATABASES = {
        "default": {
            "ENGINE": "django.db.backends.sqlite3",
            "NAME": BASE_DIR / "db.sqlite3",
        }
    }

AUTH_PASSWORD_VALIDATORS = [
    {"NAME": "django.contrib.auth.password_validation.UserAttributeSimilarityValidator"},
    {"NAME": "django.contrib.auth.password_validation.MinimumLengthValidator"},
    {"NAME": "django.contrib.auth.password_validation.CommonPasswordValidator"},
    {"NAME": "django.contrib.auth.password_validation.NumericPasswordValidator"},
]

LANGUAGE_CODE = "en-us"
TIME_ZONE = "UTC"
USE_I18N = True
USE_TZ = True

# Static files
STATIC_URL = "/static/"
STATIC_ROOT = BASE_DIR / "staticfiles"

# Django 5 storages for whitenoise
STORAGES = {
    "staticfiles": {
        "BACKEND": "whitenoise.storage.CompressedManifestStaticFilesStorage",
    },
}

DEFAULT_AUTO_FIELD = "django.db.models.BigAutoField"

# Record store (orders/<uid>/<orderId>, users/<uid>)
RECORD_STORE_BACKEND = config("RECORD_STORE_BACKEND", default="firebase")
FIREBASE_DATABASE_URL = config("FIREBASE_DATABASE_URL", default="")
FIREBASE_AUTH_TOKEN = config("FIREBASE_AUTH_TOKEN", default="")
RECORD_STORE_TIMEOUT = config("RECORD_STORE_TIMEOUT", default=10, cast=float)

# Map services
GEOCODER_URL = config("GEOCODER_URL", default="https://nominatim.openstreetmap.org")
GEOCODER_USER_AGENT = config("GEOCODER_USER_AGENT", default="foodhub/1.0")
ROUTER_URL = config("ROUTER_URL", default="https://router.project-osrm.org")
LOCATION_TIMEOUT = config("LOCATION_TIMEOUT", default=10, cast=float)

# Cart cookie
CART_COOKIE_PREFIX = config("CART_COOKIE_PREFIX", default="cart_items")
CART_COOKIE_MAX_AGE_DAYS = config("CART_COOKIE_MAX_AGE_DAYS", default=7, cast=int)
CART_COOKIE_SALT = config("CART_COOKIE_SALT", default="foodhub.cart")

# Checkout and orders
DEFAULT_CURRENCY = config("DEFAULT_CURRENCY", default="PHP")
ORDER_ESTIMATED_DELIVERY_MINUTES = config("ORDER_ESTIMATED_DELIVERY_MINUTES", default=30, cast=int)
CHECKOUT_REDIRECT_URL = config("CHECKOUT_REDIRECT_URL", default="/orders")
CHECKOUT_REDIRECT_DELAY_SECONDS = config("CHECKOUT_REDIRECT_DELAY_SECONDS", default=2, cast=int)
CHECKOUT_INFLIGHT_TTL_SECONDS = config("CHECKOUT_INFLIGHT_TTL_SECONDS", default=30, cast=int)
ORDER_STREAM_KEEPALIVE_SECONDS = config("ORDER_STREAM_KEEPALIVE_SECONDS", default=15, cast=int)

# DRF + Spectacular
REST_FRAMEWORK = {
    "DEFAULT_SCHEMA_CLASS": "drf_spectacular.openapi.AutoSchema",
    "DEFAULT_AUTHENTICATION_CLASSES": [
        "rest_framework_simplejwt.authentication.JWTAuthentication",
        "rest_framework.authentication.SessionAuthentication",
    ],
    "DEFAULT_PERMISSION_CLASSES": [
        "rest_framework.permissions.AllowAny",
    ],
    "DEFAULT_THROTTLE_CLASSES": [
        "rest_framework.throttling.ScopedRateThrottle",
        "rest_framework.throttling.UserRateThrottle",
        "rest_framework.throttling.AnonRateThrottle",
    ],
    "DEFAULT_THROTTLE_RATES": {
        # Global throttles
        "user": "100/min",
        "anon": "20/min",
        # Scoped throttles for sensitive flows
        "signin": "10/min",
        "token_refresh": "60/min",
        "signout": "60/min",
        "profile": "120/min",
        "register": "10/min",
        "password_change": "5/min",
        # Domain scopes; reads > writes
        "catalog": "120/min",
        "cart": "120/min",
        "cart_write": "60/min",
        "orders": "60/min",
        "orders_write": "10/min",
        "locations": "30/min",
    },
}

SPECTACULAR_SETTINGS = {
    "TITLE": "Foodhub API",
    "DESCRIPTION": "Food ordering backend: restaurants, cart, checkout and order tracking",
    "VERSION": "1.0.0",
    "SERVE_INCLUDE_SCHEMA": False,
}
