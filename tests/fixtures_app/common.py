from routemark import GET, Request, Response


class BaseCrud:
    """Not a controller itself; contributes routes to subclasses."""

    items = ["hammer", "saw"]

    @GET("/count", template="message.html")
    def count(self, request: Request, response: Response) -> dict:
        return {"message": str(len(self.items))}
