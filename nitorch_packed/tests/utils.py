import torch
from nitorch_packed.provider import set_num_threads


def get_test_devices():
    devices = [('cpu', 1), ('cpu', 4)]
    if torch.cuda.is_available():
        print('cuda backend available')
        devices.append('cuda')
    return devices


def init_device(device):
    if isinstance(device, (list, tuple)):
        device, param = device
    else:
        param = 1 if device == 'cpu' else 0
    if device == 'cuda':
        torch.cuda.set_device(param)
        torch.cuda.init()
        try:
            torch.cuda.empty_cache()
        except RuntimeError:
            pass
        device = '{}:{}'.format(device, param)
    else:
        assert device == 'cpu'
        set_num_threads(param)
    device = torch.device(device)
    return device


# test matrices
symmetric3x3 = [[1., 2., 3.], [2., 2., 0.], [3., 0., 3.]]
symmetric4x4 = [[1., 2., -3., 4.], [2., 5., -6., 7.],
                [-3., -6., 8., 9.], [4., 7., 9., 10.]]
square3x3 = [[-1.1, -2.2, -3.3], [0.0, 1.1, 2.2], [-4.4, 5.5, 6.6]]
square4x4 = [[-1.1, -2.2, -3.3, -4.4], [0.0, 1.1, 2.2, 3.3],
             [1.0, 2.1, 6.2, 4.3], [-4.4, 5.5, 6.6, -7.7]]


def random_symmetric(order, **backend):
    from nitorch_packed.matrices import SymmetricMatrix
    mat = torch.randn([order, order], **backend)
    return SymmetricMatrix.from_array(mat + mat.T)
