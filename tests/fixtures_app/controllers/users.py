from typing import Any, Dict

from routemark import GET, POST, Controller, Request, Response, RouteException

USERS = {"1": "ada", "2": "linus"}


@Controller("/users/")
class UsersController:

    @GET("/list", template="users/list.html")
    def list_users(self, request: Request, response: Response) -> dict:
        return {"users": sorted(USERS.values())}

    @GET("/trace", template="trace.html")
    def trace(self, request: Request, response: Response) -> dict:
        return {"trace": list(request.attribute("trace") or [])}

    @GET("/:id", template="users/show.html")
    def show(self, request: Request, response: Response) -> dict:
        name = USERS.get(request.params["id"])
        if name is None:
            raise RouteException(404, "User not found")
        return {"name": name}

    @POST("/", template="users/created.html")
    def create(self, request: Request, response: Response) -> Dict[str, Any]:
        payload = request.json()
        response.status = 201
        return {"name": payload["name"]}
