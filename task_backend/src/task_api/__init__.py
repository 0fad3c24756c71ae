"""
FastAPI Task Backend package.

Exposes four task procedures (createTask, getTasks, updateTask, deleteTask)
plus a health check under the /rpc prefix. Serve it with:

    uvicorn src.task_api.main:app --port 2022
"""
