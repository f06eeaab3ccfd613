from routemark import After, Before, Request, Response


class BaseAudit:

    @Before()
    def audit(self, request: Request, response: Response):
        request.attribute("seen", (request.attribute("seen") or []) + ["audit"])

    @After()
    def report(self, request: Request, response: Response):
        response.header("x-seen", ",".join(request.attribute("seen") or []))


class StrictAudit(BaseAudit):

    @Before()
    def strict(self, request: Request, response: Response):
        request.attribute("seen", (request.attribute("seen") or []) + ["strict"])
