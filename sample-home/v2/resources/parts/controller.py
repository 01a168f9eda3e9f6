from rik.controller import ResourceController


class Controller(ResourceController):
    sub_of = "widgets"

    async def get(self, request, response, path_params, context):
        return {"widget": path_params["parent_id"], "part": path_params.get("id")}
