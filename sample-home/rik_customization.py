def setup_router_before_api(router):
    @router.get("/ping")
    async def ping():
        return {"pong": True}


def setup_router_after_api(router):
    pass
