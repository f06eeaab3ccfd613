from routemark import GET, Controller, Request, Response


@Controller("/good")
class GoodController:

    @GET("/", template="message.html")
    def index(self, request: Request, response: Response) -> dict:
        return {"message": "still here"}
