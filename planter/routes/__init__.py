"""
FastAPI routers for all API endpoints.

Each module defines a router for one area (plants, recommendations, chat).
All routers follow the 6-step endpoint flow:
auth -> validate -> domain filter -> call service -> map to response model -> persistence (in service).

Domain errors (planter.utils.exceptions.PlanterError) are not caught here;
the handler registered in planter/main.py renders them.
"""
