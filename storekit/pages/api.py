"""
JSON API конструктора страниц.

    GET    /api/page-elements/homepage/                        публичный список
    GET    /api/admin/page-elements/homepage/                  список блоков
    POST   /api/admin/page-elements/homepage/                  создать блок
    PUT    /api/admin/page-elements/homepage/                  reorder [{id, order}]
    PUT    /api/admin/page-elements/homepage/{element_id}/     изменить блок
    DELETE /api/admin/page-elements/homepage/{element_id}/     удалить блок

page_identifier приходит из kwargs маршрута.
"""

from rest_framework import status
from rest_framework.permissions import AllowAny
from rest_framework.response import Response
from rest_framework.views import APIView

from accounts.permissions import IsAdminRole

from . import services
from .serializers import PageElementSerializer, resolved_element_payload


class PublicPageElementsView(APIView):
    permission_classes = [AllowAny]

    def get(self, request, page_identifier):
        context = {'request': request}
        return Response([
            resolved_element_payload(item, context)
            for item in services.resolve_page(page_identifier)
        ])


class PageElementListView(APIView):
    permission_classes = [IsAdminRole]

    def get(self, request, page_identifier):
        elements = services.list_elements(page_identifier)
        return Response(PageElementSerializer(elements, many=True).data)

    def post(self, request, page_identifier):
        data = request.data if isinstance(request.data, dict) else {}
        element = services.create_element(
            page_identifier,
            data.get('element_type'),
            data.get('config'),
            data.get('order'),
        )
        return Response(PageElementSerializer(element).data, status=status.HTTP_201_CREATED)

    def put(self, request, page_identifier):
        modified = services.reorder_elements(page_identifier, request.data)
        return Response({
            'message': 'Page elements reordered successfully.',
            'modifiedCount': modified,
        })


class PageElementDetailView(APIView):
    permission_classes = [IsAdminRole]

    def get(self, request, page_identifier, element_id):
        element = services.get_element(page_identifier, element_id)
        return Response(PageElementSerializer(element).data)

    def put(self, request, page_identifier, element_id):
        data = request.data if isinstance(request.data, dict) else {}
        element = services.update_element(page_identifier, element_id, data)
        return Response(PageElementSerializer(element).data)

    def patch(self, request, page_identifier, element_id):
        return self.put(request, page_identifier, element_id)

    def delete(self, request, page_identifier, element_id):
        services.delete_element(page_identifier, element_id)
        return Response({'message': 'Element deleted successfully'})
