"""
Snippetbox — Route Handlers Package
=====================================

Route Inventory:
    - health.py:   GET  /ping, GET /health
    - snippets.py: GET  /, GET /about, GET /snippet/view/{id},
                   GET|POST /snippet/create
    - users.py:    GET|POST /user/signup, GET|POST /user/login,
                   POST /user/logout
    - account.py:  GET  /account/view, GET|POST /account/password/update

Handlers are thin: parse the form, call a service, then render a page or
redirect (303 See Other after every successful POST). Page routers carry
the CSRF check and authentication loading as router-level dependencies.
"""

from fastapi import Depends

from snippetbox.security import load_authentication, verify_csrf_token

PAGE_DEPENDENCIES = [Depends(verify_csrf_token), Depends(load_authentication)]
