from routemark import After, Before, Request, Response


class RequestTrace:
    """Records which hooks saw the request."""

    @Before()
    def start(self, request: Request, response: Response):
        request.attribute("trace", ["start"])

    @Before()
    def mark(self, request: Request, response: Response) -> None:
        request.attribute("trace").append("mark")

    @After()
    def finish(self, request: Request, response: Response):
        trace = request.attribute("trace") or []
        response.header("x-trace", ",".join(trace + ["finish"]))
