from routemark import GET, Controller, Request, Response


@Controller("/invalid")
class InvalidController:

    @GET("/no-request")
    def no_request(self, request: str, response: Response) -> dict:
        return {}

    @GET("/no-response")
    def no_response(self, request: Request, response: dict) -> dict:
        return {}

    @GET("/no-mapping")
    def no_mapping(self, request: Request, response: Response) -> str:
        return "nope"

    @GET("/extra")
    def extra(self, request: Request, response: Response, user: str) -> dict:
        return {}

    @GET("/ok", template="ping.html")
    def ok(self, request: Request, response: Response, verbose: bool = False) -> dict:
        return {"pong": "ok"}
