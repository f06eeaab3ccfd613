from routemark import DELETE, GET, OPTIONS, PUT, Controller, Request, Response, Route


@Controller()
class PagesController:

    @GET("/", template="message.html")
    @GET("/home", template="message.html")
    def home(self, request: Request, response: Response) -> dict:
        return {"message": "home"}

    @PUT("/settings", template="message.html")
    def update_settings(self, request: Request, response: Response) -> dict:
        return {"message": "updated"}

    @DELETE("/settings", template="message.html")
    def delete_settings(self, request: Request, response: Response) -> dict:
        return {"message": "deleted"}

    @OPTIONS("/settings", template="message.html")
    def settings_options(self, request: Request, response: Response) -> dict:
        response.header("allow", "PUT, DELETE, OPTIONS")
        return {"message": "options"}

    @Route("/legacy", method="post", template="message.html")
    def legacy(self, request: Request, response: Response) -> dict:
        return {"message": "legacy"}
