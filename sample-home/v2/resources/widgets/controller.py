from rik.controller import ResourceController


class Controller(ResourceController):
    async def get(self, request, response, path_params, context):
        context.logger.debug("v2 widgets lookup %s", path_params)
        return {"version": context.version, "id": path_params.get("id"), "items": []}
