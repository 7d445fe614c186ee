"""
Routers layer
API路由层
"""
