from routemark import GET, Controller, Request, Response


@Controller("/dup")
class DuplicateController:

    @GET("/same", template="message.html")
    def first(self, request: Request, response: Response) -> dict:
        return {"message": "first"}

    @GET("/same", template="message.html")
    def second(self, request: Request, response: Response) -> dict:
        return {"message": "second"}
