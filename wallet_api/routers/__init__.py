"""
FastAPI routers grouped by domain (auth, wallet, transactions).

Each module exposes an APIRouter included by the app factory; services are
reached through the ServiceContext stored on app.state.
"""
