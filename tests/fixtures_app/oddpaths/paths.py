from routemark import GET, Controller, Request, Response


@Controller("/q")
class OddPaths:

    @GET("/:", template="message.html")
    def unnamed(self, request: Request, response: Response) -> dict:
        return {"message": "unreachable"}

    @GET("/:user-id", template="message.html")
    def by_user(self, request: Request, response: Response) -> dict:
        return {"message": request.params["user-id"]}

    @GET("/a/:id/b/:id", template="message.html")
    def repeated(self, request: Request, response: Response) -> dict:
        return {"message": request.params["id"]}


@Controller("/p")
class PlainPaths:

    @GET("/ok", template="message.html")
    def ok(self, request: Request, response: Response) -> dict:
        return {"message": "ok"}
